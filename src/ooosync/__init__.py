"""Clockify time-off to Google Calendar OOO sync."""
