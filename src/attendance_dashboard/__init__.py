"""School attendance admin dashboard.

A thin Flask view layer over client-side stores that cache the attendance
REST API (students, attendance sessions, reports).
"""
