"""
Entry point for the content store hierarchy extraction.
"""

from content_migration.migration_tool import ContentStoreMigrationTool

CONFIG_FILE = "config/migration_config.json"


def main():
    """
    Main function to run the hierarchy extraction over the documents found in
    the configured input directory.
    """
    tool = ContentStoreMigrationTool(config_file=CONFIG_FILE)
    tool.log_message("Starting content store hierarchy extraction.")

    if not tool.config["migration"]["content_path"]:
        tool.log_message(
            "Content path ('content_path') not set in config/migration_config.json or CONTENT_PATH; "
            "image URLs will be relative.",
            level="WARNING",
        )

    document = tool.run()
    if document is None:
        tool.log_message("Extraction failed, see reports/migration/errors.jsonl.", level="ERROR")
        return

    tool.log_message(f"Extraction finished with {len(document.sections)} sections.")


if __name__ == "__main__":
    main()
