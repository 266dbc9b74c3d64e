"""Command-line interface for replaying event histories"""
