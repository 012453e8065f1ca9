"""Dashboard domain - read-only aggregates"""
