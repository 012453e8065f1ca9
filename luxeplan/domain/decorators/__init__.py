"""Decorators domain - vendor applications, approval and work status"""
