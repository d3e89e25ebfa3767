"""ADSBX to Cursor-on-Target ETL: enrich live ADS-B aircraft and emit GeoJSON."""
