"""
Custom exceptions for the life tracker application.
Provides specific exception types for better error handling and recovery.
"""


class LifeTrackerException(Exception):
    """Base exception for life tracker application"""
    pass


class InsufficientBonusException(LifeTrackerException):
    """Raised when a bonus application exceeds the current weekly pool"""
    def __init__(self, requested: int, available: int):
        self.requested = requested
        self.available = available
        if requested <= 0:
            message = f"Bonus amount must be positive. You have {available} points available."
        else:
            message = f"Not enough bonus available. You have {available} points."
        super().__init__(message)


class TodoNotFoundException(LifeTrackerException):
    """Raised when a todo is not found"""
    def __init__(self, todo_id: int):
        self.todo_id = todo_id
        super().__init__(f"Todo with ID {todo_id} not found")
