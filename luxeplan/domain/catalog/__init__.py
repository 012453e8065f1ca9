"""Catalog domain - bookable decoration services"""
