"""Cages domain - Cage inventory management"""
