from django.urls import path, re_path

from .views import (
    OrderActionView,
    OrderDetailView,
    OrderListView,
    OrderMessageView,
    SalesListView,
)

urlpatterns = [
    path("", OrderListView.as_view(), name="api-orders-list"),
    re_path(r"^sales/?$", SalesListView.as_view(), name="api-orders-sales"),
    re_path(r"^(?P<order_id>\d+)/?$", OrderDetailView.as_view(), name="api-orders-detail"),
    re_path(r"^(?P<order_id>\d+)/messages/?$", OrderMessageView.as_view(), name="api-orders-messages"),
    re_path(r"^(?P<order_id>\d+)/actions/?$", OrderActionView.as_view(), name="api-orders-actions"),
]
