"""Booking backend for a single-practitioner massage business"""
