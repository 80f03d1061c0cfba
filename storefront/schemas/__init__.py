"""Request and record schemas"""
