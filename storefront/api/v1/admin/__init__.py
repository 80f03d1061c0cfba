"""Admin dashboard API"""
