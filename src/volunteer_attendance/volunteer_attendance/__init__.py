"""Volunteer attendance package.

This package is organized by feature modules (confirmations, attendance,
frequency, reports) with a thin Flask controller layer on top of
service/repository layers. External directories (activities, users) are
reached through ports so the engine never owns their data.
"""
