"""
Scheduling Domain

Appointment booking, editing and status lifecycle for the shop.

Layout:
- time_calculator.py      # HH:MM arithmetic, slot grid, local "today"
- availability_service.py # Overlap detection and slot availability
- lifecycle.py            # Status transitions and their timestamps
- repository.py           # Appointment database queries
- service.py              # Booking/edit/status workflows
- router.py               # /appointments endpoints
"""
