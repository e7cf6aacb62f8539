"""Movie Catalog API"""
