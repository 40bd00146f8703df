from django.contrib import admin

from .models import StoredCollection


@admin.register(StoredCollection)
class StoredCollectionAdmin(admin.ModelAdmin):
    list_display = ("key", "updated_at")
    search_fields = ("key",)
    readonly_fields = ("created_at", "updated_at")
    ordering = ("key",)
