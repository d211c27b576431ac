"""
Message broker abstractions used by the person stream
"""
