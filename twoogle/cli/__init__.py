"""Twoogle CLI Module - Console front end and config commands."""
