"""Payments domain - Stripe Checkout sessions and status lookups"""
