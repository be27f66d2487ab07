"""Task deadline reminders, overdue tracking, recurrence and delivery."""
