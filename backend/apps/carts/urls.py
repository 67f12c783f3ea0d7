from django.urls import path, re_path

from apps.orders.views import CheckoutView
from .views import CartItemDetailView, CartItemListView, CartView

urlpatterns = [
    path("", CartView.as_view(), name="api-cart"),
    re_path(r"^items/?$", CartItemListView.as_view(), name="api-cart-items"),
    re_path(r"^items/(?P<item_id>\d+)/?$", CartItemDetailView.as_view(), name="api-cart-item-detail"),
    re_path(r"^checkout/?$", CheckoutView.as_view(), name="api-cart-checkout"),
]
