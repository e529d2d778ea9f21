"""
View blueprints for HireTrack.
"""
from hiretrack_app.views import auth, dashboard

__all__ = ['auth', 'dashboard']
