"""
Initial migration for Lotman models.
"""

import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):
    """Create Lotman models: Lot, OutboundRecord, ExportRecord, ShipmentLine, StandardPacking."""

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Lot',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('factory', models.CharField(db_index=True, max_length=20, verbose_name='Nhà máy')),
                ('item_code', models.CharField(db_index=True, max_length=50, verbose_name='Mã hàng')),
                ('batch_number', models.CharField(blank=True, default='', max_length=50, verbose_name='Batch')),
                ('production_order', models.CharField(blank=True, default='', max_length=50, verbose_name='LSX / PO')),
                ('lot_ref', models.CharField(blank=True, default='', max_length=50, verbose_name='Lot')),
                ('location', models.CharField(blank=True, default='', max_length=255, verbose_name='Vị trí')),
                ('on_hand', models.PositiveIntegerField(default=0, verbose_name='Tồn kho')),
                ('opening_stock', models.PositiveIntegerField(default=0, verbose_name='Tồn đầu')),
                ('exported', models.PositiveIntegerField(default=0, verbose_name='Đã xuất')),
                ('planned_export', models.PositiveIntegerField(default=0, verbose_name='Cần xuất')),
                ('import_date', models.DateTimeField(blank=True, null=True, verbose_name='Ngày nhập')),
                ('expiry_date', models.DateTimeField(blank=True, null=True, verbose_name='Hạn sử dụng')),
                ('notes', models.TextField(blank=True, default='', verbose_name='Ghi chú')),
                ('remarks', models.TextField(blank=True, default='', verbose_name='Nhận xét')),
                ('supplier', models.CharField(blank=True, default='', max_length=255, verbose_name='Nhà cung cấp')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'verbose_name': 'Lô hàng',
                'verbose_name_plural': 'Lô hàng',
                'indexes': [
                    models.Index(fields=['factory', 'item_code'], name='lotman_lot_factory_item_idx'),
                    models.Index(fields=['factory', 'item_code', 'batch_number', 'production_order', 'lot_ref'], name='lotman_lot_identity_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='OutboundRecord',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('factory', models.CharField(db_index=True, max_length=20, verbose_name='Nhà máy')),
                ('shipment', models.CharField(db_index=True, max_length=50, verbose_name='Shipment')),
                ('customer_code', models.CharField(blank=True, default='', max_length=50, verbose_name='Mã khách')),
                ('item_code', models.CharField(db_index=True, max_length=50, verbose_name='Mã hàng')),
                ('batch_number', models.CharField(blank=True, default='', max_length=50, verbose_name='Batch')),
                ('production_order', models.CharField(blank=True, default='', max_length=50, verbose_name='LSX / PO')),
                ('lot_ref', models.CharField(blank=True, default='', max_length=50, verbose_name='Lot')),
                ('location', models.CharField(blank=True, default='', max_length=255, verbose_name='Vị trí')),
                ('quantity', models.PositiveIntegerField(verbose_name='Số lượng')),
                ('standard', models.PositiveIntegerField(default=0, verbose_name='Standard')),
                ('carton', models.PositiveIntegerField(default=0, verbose_name='Carton')),
                ('odd', models.PositiveIntegerField(default=0, verbose_name='ODD')),
                ('push_no', models.CharField(blank=True, default='', max_length=20, verbose_name='PushNo')),
                ('notes', models.TextField(blank=True, default='', verbose_name='Ghi chú')),
                ('approved', models.BooleanField(db_index=True, default=False, verbose_name='Đã duyệt')),
                ('approved_by', models.CharField(blank=True, default='', max_length=150, verbose_name='Người duyệt')),
                ('approved_at', models.DateTimeField(blank=True, null=True, verbose_name='Ngày duyệt')),
                ('export_date', models.DateTimeField(default=django.utils.timezone.now, verbose_name='Ngày xuất')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('lot', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='outbound_records', to='lotman.lot', verbose_name='Lô hàng')),
            ],
            options={
                'verbose_name': 'Phiếu xuất',
                'verbose_name_plural': 'Phiếu xuất',
                'ordering': ['export_date', 'pk'],
                'indexes': [
                    models.Index(fields=['factory', 'shipment'], name='lotman_outbound_shipment_idx'),
                    models.Index(fields=['approved', 'factory'], name='lotman_outbound_approved_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='ExportRecord',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('factory', models.CharField(db_index=True, max_length=20, verbose_name='Nhà máy')),
                ('item_code', models.CharField(db_index=True, max_length=50, verbose_name='Mã hàng')),
                ('batch_number', models.CharField(blank=True, default='', max_length=50, verbose_name='Batch')),
                ('production_order', models.CharField(blank=True, default='', max_length=50, verbose_name='LSX / PO')),
                ('lot_ref', models.CharField(blank=True, default='', max_length=50, verbose_name='Lot')),
                ('shipment', models.CharField(db_index=True, max_length=50, verbose_name='Shipment')),
                ('push_no', models.CharField(blank=True, default='', max_length=20, verbose_name='PushNo')),
                ('quantity', models.PositiveIntegerField(verbose_name='Số lượng')),
                ('approved_by', models.CharField(blank=True, default='', max_length=150, verbose_name='Người duyệt')),
                ('approved_at', models.DateTimeField(db_index=True, default=django.utils.timezone.now, verbose_name='Ngày duyệt')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('lot', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='exports', to='lotman.lot', verbose_name='Lô hàng')),
                ('outbound', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='exports', to='lotman.outboundrecord', verbose_name='Phiếu xuất')),
            ],
            options={
                'verbose_name': 'Bản ghi xuất kho',
                'verbose_name_plural': 'Bản ghi xuất kho',
                'ordering': ['approved_at'],
                'indexes': [
                    models.Index(fields=['factory', 'item_code', 'batch_number', 'production_order', 'lot_ref', 'shipment', 'push_no'], name='lotman_export_key_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='ShipmentLine',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('factory', models.CharField(db_index=True, max_length=20, verbose_name='Nhà máy')),
                ('shipment_code', models.CharField(db_index=True, max_length=50, verbose_name='Shipment')),
                ('item_code', models.CharField(max_length=50, verbose_name='Mã hàng')),
                ('customer_code', models.CharField(blank=True, default='', max_length=50, verbose_name='Mã khách')),
                ('quantity', models.IntegerField(verbose_name='Số lượng')),
                ('po_ship', models.CharField(blank=True, default='', max_length=50, verbose_name='PO Ship')),
                ('push_no', models.CharField(blank=True, default='', max_length=20, verbose_name='PushNo')),
                ('status', models.CharField(choices=[('pending', 'Chờ soạn'), ('preparing', 'Đang soạn'), ('done', 'Đã xong'), ('shipped', 'Đã ship'), ('delayed', 'Delay')], db_index=True, default='pending', max_length=20, verbose_name='Trạng thái')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'verbose_name': 'Dòng shipment',
                'verbose_name_plural': 'Dòng shipment',
                'ordering': ['shipment_code', 'pk'],
                'indexes': [
                    models.Index(fields=['shipment_code', 'status'], name='lotman_shipment_status_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='StandardPacking',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('item_code', models.CharField(max_length=50, unique=True, verbose_name='Mã hàng')),
                ('standard', models.PositiveIntegerField(help_text='Số lượng trên một thùng', verbose_name='Standard')),
                ('customer', models.CharField(blank=True, default='', max_length=100, verbose_name='Khách hàng')),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'verbose_name': 'Quy cách đóng gói',
                'verbose_name_plural': 'Quy cách đóng gói',
                'ordering': ['item_code'],
            },
        ),
    ]
