"""Coupons domain - discount codes"""
