import os

class Config:
    EVENTS_PATH = os.environ.get('CALENDAR_EVENTS_PATH') or 'events.csv'
    # empty string turns the action log off
    ANALYTICS_LOG = os.environ.get('CALENDAR_ANALYTICS_LOG', 'analytics.log')
    LOG_LEVEL = os.environ.get('CALENDAR_LOG_LEVEL') or 'INFO'
