from django.urls import path
from . import views

app_name = 'stations'

urlpatterns = [
    # Pairing sessions
    path('sessions/request/', views.request_session, name='session-request'),
    path('sessions/check/', views.check_session_status, name='session-check'),
    path('sessions/connect/', views.connect_session, name='session-connect'),
    path('sessions/end/', views.end_session_view, name='session-end'),
    path('sessions/deposit/', views.session_deposit, name='session-deposit'),

    # Station info
    path('config/', views.station_config, name='config'),
    path('activity/', views.station_activity, name='activity'),
]
