from django.urls import path
from . import views

app_name = 'realtime'

urlpatterns = [
    # GET  /api/realtime/changes/?after_id=0   - Poll the change feed
    path('changes/', views.changes, name='changes'),
    # POST /api/realtime/broadcast/             - Ad hoc app_updates event
    path('broadcast/', views.broadcast_update, name='broadcast'),
]
