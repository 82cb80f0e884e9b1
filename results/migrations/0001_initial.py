from django.db import migrations, models
import uuid


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='LotteryGame',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=255)),
                ('slug', models.SlugField(max_length=255, unique=True)),
                ('description', models.TextField(blank=True, default='')),
                ('number_count', models.PositiveSmallIntegerField(default=6)),
                ('max_number', models.PositiveSmallIntegerField(default=50)),
                ('has_bonus_ball', models.BooleanField(default=False)),
                ('bonus_max_number', models.PositiveSmallIntegerField(blank=True, null=True)),
                ('draw_days', models.JSONField(blank=True, default=list, help_text="Weekday names (e.g. ['Tuesday', 'Friday']) or ['Daily']")),
                ('draw_time', models.CharField(blank=True, default='', help_text='HH:MM (SAST)', max_length=20)),
                ('is_active', models.BooleanField(default=True)),
            ],
            options={
                'verbose_name': 'Lottery Game',
                'verbose_name_plural': 'Lottery Games',
                'ordering': ['id'],
            },
        ),
        migrations.CreateModel(
            name='LotteryResult',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('unique_id', models.UUIDField(default=uuid.uuid4, editable=False, unique=True)),
                ('game_slug', models.CharField(db_index=True, max_length=255)),
                ('game_name', models.CharField(max_length=255)),
                ('winning_numbers', models.JSONField(default=list)),
                ('bonus_number', models.PositiveSmallIntegerField(blank=True, null=True)),
                ('draw_date', models.DateField()),
                ('jackpot_amount', models.CharField(blank=True, max_length=255, null=True)),
                ('next_jackpot', models.CharField(blank=True, max_length=255, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'verbose_name': 'Lottery Result',
                'verbose_name_plural': 'Lottery Results',
                'ordering': ['-draw_date', '-created_at'],
            },
        ),
        migrations.CreateModel(
            name='ScraperSetting',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('game_slug', models.CharField(max_length=255, unique=True)),
                ('is_enabled', models.BooleanField(default=True)),
                ('schedule_time', models.CharField(blank=True, help_text='HH:MM in SAST; the scraper starts looking for the draw at this time', max_length=5, null=True)),
                ('last_scraped_at', models.DateTimeField(blank=True, null=True)),
            ],
            options={
                'verbose_name': 'Scraper Setting',
                'verbose_name_plural': 'Scraper Settings',
                'ordering': ['id'],
            },
        ),
        migrations.AddConstraint(
            model_name='lotteryresult',
            constraint=models.UniqueConstraint(fields=('game_slug', 'draw_date'), name='uq_result_game_draw_date'),
        ),
    ]
