from .computer_group import ComputerGroup, format_number, percent_complete

__all__ = ['ComputerGroup', 'format_number', 'percent_complete']
