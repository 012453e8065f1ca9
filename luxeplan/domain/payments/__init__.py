"""Payments domain - hosted checkout and payment reconciliation"""
