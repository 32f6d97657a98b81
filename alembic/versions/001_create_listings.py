from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '001_create_listings'
down_revision = None
branch_labels = None
depends_on = None

FULLTEXT_CONFIG = 'turkish'


def _listing_fk():
    return sa.Column('listing_id', sa.Integer, sa.ForeignKey('listings.id', ondelete='CASCADE'), primary_key=True)


def upgrade():
    op.create_table(
        'categories',
        sa.Column('id', sa.Integer, primary_key=True),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('slug', sa.String(100), nullable=False, unique=True),
        sa.Column('active', sa.Boolean, nullable=False, server_default=sa.true()),
    )
    op.create_index('ix_categories_slug', 'categories', ['slug'])

    op.create_table(
        'users',
        sa.Column('id', sa.Integer, primary_key=True, autoincrement=False),
        sa.Column('username', sa.String(50), nullable=False),
    )

    op.create_table(
        'listings',
        sa.Column('id', sa.Integer, primary_key=True),
        sa.Column('listing_type', sa.String(20), nullable=False),
        sa.Column('title', sa.String(150), nullable=False),
        sa.Column('description', sa.Text),
        sa.Column('price', sa.Numeric(12, 2), nullable=False),
        sa.Column('currency', sa.String(10), nullable=False),
        sa.Column('status', sa.String(20), nullable=False, server_default='ACTIVE'),
        sa.Column('offer_type', sa.String(20), nullable=False, server_default='FOR_SALE'),
        sa.Column('city', sa.String(50), nullable=False),
        sa.Column('district', sa.String(50), nullable=False),
        sa.Column('latitude', sa.Float),
        sa.Column('longitude', sa.Float),
        sa.Column('category_id', sa.Integer, sa.ForeignKey('categories.id'), nullable=False),
        sa.Column('created_by_id', sa.Integer, sa.ForeignKey('users.id'), nullable=False),
        sa.Column('created_at', sa.DateTime, nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime, nullable=False, server_default=sa.func.now()),
        sa.Column('view_count', sa.Integer, nullable=False, server_default='0'),
        sa.Column('favorite_count', sa.Integer, nullable=False, server_default='0'),
        sa.Column('search_document', sa.Text, nullable=False, server_default=''),
    )
    op.create_index('ix_listings_listing_type', 'listings', ['listing_type'])
    op.create_index('ix_listings_city', 'listings', ['city'])
    op.create_index('ix_listings_created_by_id', 'listings', ['created_by_id'])

    op.create_table(
        'real_estate_details',
        _listing_fk(),
        sa.Column('real_estate_type', sa.String(30), nullable=False),
        sa.Column('room_count', sa.String(20)),
        sa.Column('square_meter', sa.Integer),
        sa.Column('building_age', sa.Integer),
        sa.Column('floor', sa.Integer),
        sa.Column('heating_type', sa.String(30)),
        sa.Column('furnished', sa.Boolean, nullable=False, server_default=sa.false()),
    )
    op.create_table(
        'vehicle_details',
        _listing_fk(),
        sa.Column('brand', sa.String(50), nullable=False),
        sa.Column('model', sa.String(50), nullable=False),
        sa.Column('production_year', sa.Integer, nullable=False),
        sa.Column('fuel_type', sa.String(20), nullable=False),
        sa.Column('transmission', sa.String(20), nullable=False),
        sa.Column('kilometer', sa.Integer, nullable=False),
        sa.Column('engine_volume', sa.String(20)),
        sa.Column('series', sa.String(50)),
        sa.Column('vehicle_status', sa.String(20)),
        sa.Column('body_type', sa.String(20)),
        sa.Column('engine_power', sa.String(20)),
        sa.Column('traction_type', sa.String(20)),
        sa.Column('color', sa.String(30)),
        sa.Column('warranty', sa.Boolean),
        sa.Column('heavy_damage', sa.Boolean),
        sa.Column('plate_nationality', sa.String(50)),
        sa.Column('from_who', sa.String(30)),
        sa.Column('exchange', sa.Boolean),
    )
    op.create_table(
        'land_details',
        _listing_fk(),
        sa.Column('land_type', sa.String(30), nullable=False),
        sa.Column('square_meter', sa.Integer, nullable=False),
        sa.Column('zoning_status', sa.String(100)),
        sa.Column('parcel_number', sa.Integer, nullable=False),
        sa.Column('island_number', sa.Integer, nullable=False),
    )
    op.create_table(
        'workplace_details',
        _listing_fk(),
        sa.Column('workplace_type', sa.String(30), nullable=False),
        sa.Column('square_meter', sa.Integer, nullable=False),
        sa.Column('floor_count', sa.Integer, nullable=False),
        sa.Column('furnished', sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column('heating_type', sa.String(30)),
        sa.Column('building_age', sa.Integer),
        sa.Column('dues', sa.Numeric(10, 2)),
        sa.Column('credit_eligibility', sa.String(10)),
        sa.Column('deed_status', sa.String(30)),
        sa.Column('listing_from', sa.String(30)),
        sa.Column('exchange', sa.String(10)),
    )

    op.create_table(
        'images',
        sa.Column('id', sa.Integer, primary_key=True),
        sa.Column('listing_id', sa.Integer, nullable=False),
        sa.Column('listing_type', sa.String(20), nullable=False),
        sa.Column('file_path', sa.String(500), nullable=False),
        sa.Column('display_order', sa.Integer, nullable=False, server_default='0'),
        sa.Column('uploaded_at', sa.DateTime, server_default=sa.func.now()),
    )
    op.create_index('ix_images_listing_id', 'images', ['listing_id'])

    op.create_table(
        'saved_searches',
        sa.Column('id', sa.Integer, primary_key=True),
        sa.Column('user_id', sa.Integer, sa.ForeignKey('users.id'), nullable=False),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('search_criteria', sa.JSON, nullable=False),
        sa.Column('notification_enabled', sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime, nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime, nullable=False, server_default=sa.func.now()),
    )
    op.create_index('ix_saved_searches_user_id', 'saved_searches', ['user_id'])

    op.create_table(
        'activity_logs',
        sa.Column('id', sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column('username', sa.String(50), nullable=False),
        sa.Column('action', sa.String(255), nullable=False),
        sa.Column('description', sa.Text),
        sa.Column('entity_id', sa.Integer),
        sa.Column('details', sa.JSON),
        sa.Column('created_at', sa.DateTime, server_default=sa.func.now()),
    )
    op.create_index('ix_activity_logs_action', 'activity_logs', ['action'])

    if op.get_bind().dialect.name == 'postgresql':
        op.execute(
            "CREATE INDEX ix_listings_search_document ON listings "
            f"USING GIN (to_tsvector('{FULLTEXT_CONFIG}', search_document))"
        )

    categories = sa.table('categories', sa.column('name', sa.String), sa.column('slug', sa.String), sa.column('active', sa.Boolean))
    op.bulk_insert(categories, [
        {'name': 'Emlak', 'slug': 'emlak', 'active': True},
        {'name': 'Araç', 'slug': 'arac', 'active': True},
        {'name': 'Arsa', 'slug': 'arsa', 'active': True},
        {'name': 'İş Yeri', 'slug': 'is-yeri', 'active': True},
    ])


def downgrade():
    op.drop_table('activity_logs')
    op.drop_table('saved_searches')
    op.drop_table('images')
    op.drop_table('workplace_details')
    op.drop_table('land_details')
    op.drop_table('vehicle_details')
    op.drop_table('real_estate_details')
    op.drop_table('listings')
    op.drop_table('users')
    op.drop_table('categories')
