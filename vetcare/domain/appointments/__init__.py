"""Appointments domain - Booking, cancellation and staff status workflow"""
