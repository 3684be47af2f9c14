"""Boarding domain - Cage availability views and date-range search"""
