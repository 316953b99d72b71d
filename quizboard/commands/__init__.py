"""Command validation helpers.

Every command issued to a GameSession flows through one pipeline here before the mode
FSM is asked to transition, so ignored commands show up consistently in the logs.
"""
