"""Timeclock package.

QR-code driven attendance tracking (check-in, pause, checkout) with work-time
analytics. Organized by feature modules (events, attendance, reporting, ...)
with a thin Flask controller layer over service/repository layers.
"""
