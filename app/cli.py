"""Flask CLI commands for admin operations."""
import click
from flask import current_app


def register_cli(app):
    @app.cli.command("init-db")
    def init_db():
        """Create all tables."""
        from app.extensions import db

        db.create_all()
        click.echo(
            f"Database initialized at {current_app.config['SQLALCHEMY_DATABASE_URI']}."
        )

    @app.cli.command("seed-demo")
    def seed_demo():
        """Seed demo products with generated variants (idempotent)."""
        from app.extensions import db
        from app.models.product import Product
        from app.services.product_service import create_product, save_variants
        from app.variants.manager import VariantManager

        # Only seed if no products exist yet
        if Product.query.first():
            click.echo("Products already exist, skipping demo seed.")
            return

        demo_products = [
            ("Cotton Kurta", [("Size", ["S", "M", "L"]), ("Colour", ["Indigo", "White"])], 1499),
            ("Silk Dupatta", [("Colour", ["Red|#B22222", "Gold|#D4AF37"])], 2200),
            ("Phone Case", [("Model", ["A1", "A2"]), ("Finish", ["Matte", "Glossy"]), ("Colour", ["Black"])], 499),
        ]
        for name, options, price in demo_products:
            product = create_product(name, "cli")
            emitted = []
            manager = VariantManager(on_variants_change=emitted.append)
            for option_name, values in options:
                option = manager.add_option()
                manager.rename_option(option.id, option_name)
                for index, value in enumerate(values):
                    manager.set_value(option.id, index, value)
                manager.commit_option(option.id)
            for variant in manager.variants():
                manager.set_variant_price(variant.signature, price)
                manager.set_variant_inventory(variant.signature, 5)
            save_variants(product.id, [v.to_dict() for v in emitted[-1]], "cli")
        db.session.commit()
        click.echo(f"Seeded {len(demo_products)} demo products.")

    @app.cli.command("create-product")
    @click.option("--name", required=True)
    @click.option("--description", default="")
    def create_product_cmd(name, description):
        """Create a product directly (for testing)."""
        from app.services.product_service import create_product

        product = create_product(name, "cli", description=description)
        click.echo(f"Created: {product.id} ({product.name})")

    @app.cli.command("stats")
    def stats():
        """Show product, variant and inventory totals."""
        from app.services.product_service import get_stats

        s = get_stats()
        total = sum(s["products"].values())
        click.echo(f"Total products: {total}")
        for status, count in sorted(s["products"].items()):
            click.echo(f"  {status}: {count}")
        click.echo(f"Variants: {s['variants']}")
        click.echo(f"Units in stock: {s['inventory']}")
