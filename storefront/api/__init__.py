"""HTTP adapter over the storefront services"""
