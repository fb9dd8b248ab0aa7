from django.urls import path
from . import views

app_name = 'accounts'

urlpatterns = [
    # Authentication
    path('register/', views.register, name='register'),
    path('login/', views.login, name='login'),
    path('user/', views.get_current_user, name='current-user'),
    path('password-reset/', views.password_reset_request, name='password-reset'),
    path('password-reset/confirm/', views.password_reset_confirm, name='password-reset-confirm'),
    path('password/change/', views.password_change, name='password-change'),

    # Staff management
    path('staff/', views.staff_list, name='staff-list'),
    path('staff/invite/', views.invite, name='staff-invite'),
    path('staff/<uuid:staff_id>/toggle-role/', views.toggle_role, name='staff-toggle-role'),
    path('staff/<uuid:staff_id>/revoke/', views.revoke_access, name='staff-revoke'),
    path('staff/<uuid:staff_id>/restore/', views.restore_access, name='staff-restore'),

    # Proxies
    path('send-invite-email/', views.send_invite_email_view, name='send-invite-email'),
    path('access-sync/', views.access_sync, name='access-sync'),
]
