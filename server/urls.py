"""Main URL mapping configuration file."""

from django.contrib import admin
from django.urls import include, path

urlpatterns = [
    path('api/files/', include('server.apps.filetree.api.urls')),
    path('admin/', admin.site.urls),
]
