"""Clinic application for the MedixOne front-end.

This package holds the session stores (language, authentication), the route
guard that gates every page navigation, the page shells and the JSON API
consumed by the browser.
"""
