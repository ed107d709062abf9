"""
URL patterns do diretório de usuários.

Endpoints API JSON (GET):
- /users/api/self/
- /users/api/by-ids/
- /users/api/by-emails/
- /users/api/courses/<course_id>/staff/
- /users/api/courses/<course_id>/staff/online/
"""

from django.urls import path
from . import api_views

app_name = 'directory'

urlpatterns = [
    path('api/self/', api_views.SelfUserAPIView.as_view(), name='api_self'),
    path('api/by-ids/', api_views.UsersByIdsAPIView.as_view(), name='api_by_ids'),
    path('api/by-emails/', api_views.UsersByEmailsAPIView.as_view(), name='api_by_emails'),
    path(
        'api/courses/<str:course_id>/staff/',
        api_views.CourseStaffAPIView.as_view(),
        name='api_course_staff',
    ),
    path(
        'api/courses/<str:course_id>/staff/online/',
        api_views.CourseOnlineStaffAPIView.as_view(),
        name='api_course_online_staff',
    ),
]
