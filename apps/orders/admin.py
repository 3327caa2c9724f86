"""
Django admin configuration for orders app.
Pickup code fields are read-only: codes are issued and redeemed by services only.
"""

from typing import ClassVar

from django.contrib import admin

from .models import Order, OrderItem, OrderStatusHistory


class OrderItemInline(admin.TabularInline):
    """Inline admin for order items."""
    model = OrderItem
    extra = 0
    readonly_fields: ClassVar[list[str]] = ('line_total_cents', 'created_at')
    fields: ClassVar[list[str]] = (
        'product_name', 'quantity', 'unit_price_cents', 'selected_size',
        'selected_color', 'line_total_cents', 'created_at'
    )


class OrderStatusHistoryInline(admin.TabularInline):
    """Inline admin for order status history."""
    model = OrderStatusHistory
    extra = 0
    can_delete = False
    readonly_fields: ClassVar[list[str]] = (
        'old_status', 'new_status', 'changed_by', 'reason', 'is_automatic', 'created_at'
    )
    fields: ClassVar[list[str]] = readonly_fields


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    """Admin interface for orders."""

    list_display: ClassVar[list[str]] = (
        'order_number', 'customer', 'merchant', 'status', 'delivery_method',
        'payment_status', 'total_cents', 'currency', 'pickup_code_used', 'created_at'
    )
    list_filter: ClassVar[list[str]] = (
        'status', 'delivery_method', 'payment_status', 'pickup_code_used', 'created_at'
    )
    search_fields: ClassVar[list[str]] = (
        'order_number', 'customer__email', 'merchant__business_name', 'pickup_code'
    )
    readonly_fields: ClassVar[list[str]] = (
        'order_number', 'pickup_code', 'pickup_code_expiry', 'pickup_code_used',
        'total_cents', 'created_at', 'updated_at', 'completed_at'
    )
    inlines: ClassVar[list] = [OrderItemInline, OrderStatusHistoryInline]

    fieldsets: ClassVar[tuple] = (
        ('Order Information', {
            'fields': ('order_number', 'customer', 'merchant', 'status', 'delivery_method')
        }),
        ('Payment', {
            'fields': ('total_cents', 'currency', 'payment_status', 'payment_method')
        }),
        ('Pickup', {
            'fields': ('pickup_code', 'pickup_code_expiry', 'pickup_code_used')
        }),
        ('Additional Information', {
            'fields': ('notes',),
            'classes': ('collapse',)
        }),
        ('Timestamps', {
            'fields': ('created_at', 'updated_at', 'completed_at'),
            'classes': ('collapse',)
        })
    )


@admin.register(OrderStatusHistory)
class OrderStatusHistoryAdmin(admin.ModelAdmin):
    """Admin interface for order status history."""

    list_display: ClassVar[list[str]] = (
        'order', 'old_status', 'new_status', 'changed_by', 'is_automatic', 'created_at'
    )
    list_filter: ClassVar[list[str]] = ('new_status', 'is_automatic', 'created_at')
    search_fields: ClassVar[list[str]] = ('order__order_number', 'reason', 'notes')
    readonly_fields: ClassVar[list[str]] = (
        'order', 'old_status', 'new_status', 'changed_by', 'reason', 'notes', 'is_automatic', 'created_at'
    )
