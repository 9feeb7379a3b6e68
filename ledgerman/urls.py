"""
Ledgerman URL configuration.

    path('api/stock/', include('ledgerman.urls')),
"""

from django.urls import path

from ledgerman import views

app_name = 'ledgerman'

urlpatterns = [
    path('movements/', views.create_movement, name='create_movement'),
    path('products/<str:product_id>/movements/', views.product_movements, name='product_movements'),
]
