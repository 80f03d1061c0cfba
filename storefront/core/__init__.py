"""Core configuration, errors, storage and session"""
