"""URL routes of the file tree API."""

from django.urls import path

from server.apps.filetree.api import views

app_name = 'filetree'

urlpatterns = [
    path('', views.list_children, name='list'),
    path('all/', views.list_all, name='list-all'),
    path('folders/', views.create_folder, name='create-folder'),
    path('upload/', views.upload, name='upload'),
    path('<int:node_id>/', views.node_detail, name='node'),
]
