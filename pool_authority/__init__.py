"""Pool Authority API - Stripe payments and branded customer emails"""
