from django.contrib import admin
from .models import (
    Article,
    ArticleProduct,
    ArticlePromotion,
    LocationArticle,
    LocationProduct,
    LocationPromotion,
    Product,
    ProductPromotion,
    Promotion,
)
from .relationships import delete_entity, links_of


class CascadeDeleteAdminMixin:
    """
    Admin deletes go through delete_entity so link rows are purged with the
    entity instead of blocking it as protected objects.
    """
    entity_kind = None

    def get_deleted_objects(self, objs, request):
        to_delete, model_count, perms_needed, _ = super().get_deleted_objects(objs, request)
        for rows in links_of(self.entity_kind, [obj.pk for obj in objs]).values():
            count = 0
            for row in rows:
                to_delete.append(f"{row._meta.verbose_name.capitalize()}: {row}")
                count += 1
            if count:
                name = rows.model._meta.verbose_name_plural
                model_count[name] = model_count.get(name, 0) + count
        return to_delete, model_count, perms_needed, []

    def delete_model(self, request, obj):
        delete_entity(self.entity_kind, obj.pk)

    def delete_queryset(self, request, queryset):
        for pk in list(queryset.values_list('pk', flat=True)):
            delete_entity(self.entity_kind, pk)


@admin.register(Article)
class ArticleAdmin(CascadeDeleteAdminMixin, admin.ModelAdmin):
    entity_kind = 'article'
    list_display = ('title', 'category', 'date_posted', 'updated_at')
    list_filter = ('category', 'date_posted')
    search_fields = ('title', 'content_summary')
    readonly_fields = ('created_at', 'updated_at')


@admin.register(Product)
class ProductAdmin(CascadeDeleteAdminMixin, admin.ModelAdmin):
    entity_kind = 'product'
    list_display = ('name', 'category', 'price', 'updated_at')
    list_filter = ('category',)
    search_fields = ('name', 'description')
    readonly_fields = ('created_at', 'updated_at')


@admin.register(Promotion)
class PromotionAdmin(CascadeDeleteAdminMixin, admin.ModelAdmin):
    entity_kind = 'promotion'
    list_display = ('name', 'updated_at')
    search_fields = ('name', 'description')
    readonly_fields = ('created_at', 'updated_at')


for link_model in (
    LocationArticle, LocationProduct, LocationPromotion,
    ArticleProduct, ArticlePromotion, ProductPromotion,
):
    admin.site.register(link_model)
