"""Bookings domain - booking lifecycle and decorator assignment"""
