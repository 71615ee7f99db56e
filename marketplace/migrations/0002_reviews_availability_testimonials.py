import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    dependencies = [
        ('marketplace', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Review',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('reviewable_type', models.CharField(choices=[('doctor', 'Doctor'), ('hospital', 'Hospital'), ('implant_company', 'Implant Company'), ('booking_experience', 'Booking Experience')], max_length=20)),
                ('reviewable_id', models.PositiveIntegerField()),
                ('reviewer_type', models.CharField(choices=[('patient', 'Patient'), ('doctor', 'Doctor'), ('hospital', 'Hospital')], max_length=10)),
                ('rating', models.PositiveSmallIntegerField(validators=[django.core.validators.MinValueValidator(1), django.core.validators.MaxValueValidator(5)])),
                ('review_title', models.CharField(blank=True, max_length=200)),
                ('review_text', models.TextField(blank=True)),
                ('detailed_ratings', models.JSONField(blank=True, default=dict)),
                ('procedure_type', models.CharField(blank=True, max_length=255)),
                ('treatment_date', models.DateField(blank=True, null=True)),
                ('is_verified', models.BooleanField(default=False)),
                ('is_anonymous', models.BooleanField(default=False)),
                ('is_featured', models.BooleanField(default=False)),
                ('status', models.CharField(choices=[('pending', 'Pending'), ('approved', 'Approved'), ('rejected', 'Rejected'), ('flagged', 'Flagged')], db_index=True, default='pending', max_length=10)),
                ('moderation_notes', models.TextField(blank=True)),
                ('moderated_at', models.DateTimeField(blank=True, null=True)),
                ('helpful_count', models.PositiveIntegerField(default=0)),
                ('not_helpful_count', models.PositiveIntegerField(default=0)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('booking', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='reviews', to='marketplace.booking')),
                ('moderated_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL)),
                ('reviewer', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='reviews', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['reviewable_type', 'reviewable_id', 'status'], name='marketplace_reviewa_3f8c2d_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='DoctorAvailability',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('available_date', models.DateField(db_index=True)),
                ('available_time_slots', models.JSONField(blank=True, default=list)),
                ('willing_to_travel', models.BooleanField(default=False)),
                ('max_travel_distance_km', models.PositiveIntegerField(default=0)),
                ('preferred_cities', models.JSONField(blank=True, default=list)),
                ('consultation_fee', models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True)),
                ('surgery_fee', models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True)),
                ('travel_allowance', models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True)),
                ('required_equipment', models.JSONField(blank=True, default=list)),
                ('required_support_staff', models.PositiveSmallIntegerField(default=2)),
                ('is_available', models.BooleanField(default=True)),
                ('booking_lead_time_hours', models.PositiveSmallIntegerField(default=48)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('doctor', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='availability', to='marketplace.doctor')),
            ],
            options={
                'ordering': ['available_date', '-created_at'],
                'verbose_name_plural': 'doctor availability',
            },
        ),
        migrations.CreateModel(
            name='HospitalAvailability',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('facility_type', models.CharField(choices=[('operation_theater', 'Operation Theater'), ('consultation_room', 'Consultation Room'), ('diagnostic_center', 'Diagnostic Center')], max_length=20)),
                ('facility_name', models.CharField(max_length=255)),
                ('specialization_supported', models.JSONField(blank=True, default=list)),
                ('equipment_available', models.JSONField(blank=True, default=list)),
                ('available_date', models.DateField(db_index=True)),
                ('available_time_slots', models.JSONField(blank=True, default=list)),
                ('facility_cost_per_hour', models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True)),
                ('equipment_cost', models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True)),
                ('support_staff_cost', models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True)),
                ('total_package_cost', models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True)),
                ('is_available', models.BooleanField(default=True)),
                ('booking_lead_time_hours', models.PositiveSmallIntegerField(default=24)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('hospital', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='availability', to='marketplace.hospital')),
            ],
            options={
                'ordering': ['available_date', 'facility_type'],
                'verbose_name_plural': 'hospital availability',
            },
        ),
        migrations.CreateModel(
            name='PatientTestimonial',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('rating', models.PositiveSmallIntegerField(validators=[django.core.validators.MinValueValidator(1), django.core.validators.MaxValueValidator(5)])),
                ('testimonial_text', models.TextField()),
                ('treatment_type', models.CharField(blank=True, max_length=255)),
                ('is_featured', models.BooleanField(default=False)),
                ('display_order', models.PositiveIntegerField(default=0)),
                ('region', models.CharField(db_index=True, default='global', max_length=100)),
                ('consent_for_display', models.BooleanField(default=False)),
                ('is_anonymous', models.BooleanField(default=False)),
                ('patient_name_display', models.CharField(blank=True, max_length=100)),
                ('is_verified', models.BooleanField(default=False)),
                ('verified_at', models.DateTimeField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('booking', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to='marketplace.booking')),
                ('doctor', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='testimonials', to='marketplace.doctor')),
                ('hospital', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to='marketplace.hospital')),
                ('patient', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='testimonials', to='marketplace.patient')),
                ('verified_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'ordering': ['display_order', '-created_at'],
            },
        ),
    ]
