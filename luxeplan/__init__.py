"""LuxePlan API - bookings marketplace for event decorators"""
