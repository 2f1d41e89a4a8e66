"""
Boundary layer for external system integrations.

Handles the relational store (bookings, payments, reviews) and outbound
notification delivery.
"""
