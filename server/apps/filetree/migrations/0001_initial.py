import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Node',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=255)),
                ('kind', models.CharField(choices=[('file', 'File'), ('folder', 'Folder')], max_length=6)),
                ('physical_ref', models.CharField(blank=True, default='', help_text='Blob locator: {owner_id}/{timestamp}_{token}_{filename}', max_length=1024)),
                ('size_bytes', models.BigIntegerField(blank=True, help_text='File size in bytes, as declared at upload', null=True)),
                ('content_type', models.CharField(blank=True, default='', max_length=255)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('owner', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='nodes', to=settings.AUTH_USER_MODEL)),
                ('parent', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='children', to='filetree.node')),
            ],
            options={
                'verbose_name': 'Node',
                'verbose_name_plural': 'Nodes',
                'ordering': ['-kind', 'name'],
                'indexes': [models.Index(fields=['owner', 'parent'], name='nodes_owner_parent_idx')],
                'constraints': [
                    models.UniqueConstraint(condition=models.Q(('kind', 'folder')), fields=('owner', 'parent', 'name'), name='nodes_folder_name_unique'),
                    models.UniqueConstraint(condition=models.Q(('kind', 'folder'), ('parent__isnull', True)), fields=('owner', 'name'), name='nodes_root_folder_name_unique'),
                    models.UniqueConstraint(condition=models.Q(('kind', 'file')), fields=('physical_ref',), name='nodes_physical_ref_unique'),
                    models.CheckConstraint(condition=models.Q(models.Q(('content_type', ''), ('kind', 'folder'), ('physical_ref', ''), ('size_bytes__isnull', True)), models.Q(('kind', 'file'), models.Q(('physical_ref', ''), _negated=True)), _connector='OR'), name='nodes_kind_fields_consistent'),
                ],
            },
        ),
    ]
