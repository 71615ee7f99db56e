"""Marketplace application for the SurgiBook backend.

Models, services, views and route registrations for the surgery booking
marketplace: accounts and approvals, bookings, commission bookkeeping,
notifications and one-time passwords.
"""
