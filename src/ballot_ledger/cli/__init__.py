"""Command-line interface for Ballot Ledger"""
