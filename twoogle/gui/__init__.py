"""Twoogle GUI Module - tkinter front end."""
