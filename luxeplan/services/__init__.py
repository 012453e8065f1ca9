"""Outbound integrations shared across domains"""
