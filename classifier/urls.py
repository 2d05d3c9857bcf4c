from django.urls import path
from . import views

urlpatterns = [
    path('', views.home, name='home'),
    path('classify/', views.classify, name='classify'),
    path('export/', views.export, name='export'),
    path('clear/', views.clear, name='clear'),
    # Mock backend, same paths as the real classification service
    path('classify/file', views.mock_classify_file, name='mock_classify_file'),
    path('classify/order', views.mock_classify_order, name='mock_classify_order'),
]
