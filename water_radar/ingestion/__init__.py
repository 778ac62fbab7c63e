"""
Ingestion: tolerant CSV/JSON parsing of pasted or uploaded water tables and
merging into the working dataset.

Modules
-------
importer : parse_csv() + parse_json() + parse_import_text() + merge_by_id().
           Callers own file reading and pass decoded text.
"""
