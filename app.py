import logging

import gradio as gr

from json_schema_ddl.handlers_schema import (
    RULE_TABLE_HEADERS,
    create_schema_handler,
    export_schema_handler,
    load_samples_handler,
)
from json_schema_ddl.handlers_sql import (
    export_sql_handler,
    generate_sql_handler,
    load_schema_handler,
    use_created_schema_handler,
)
from json_schema_ddl.type_mapping import DIALECT_LABELS

# --- UI Definition ---
with gr.Blocks(title="JSON Schema to SQL DDL") as demo:
    gr.Markdown("# JSON Schema to SQL DDL")
    gr.Markdown("Infer a JSON Schema from sample data, adjust field types and required fields, then generate a CREATE TABLE statement.")

    # State
    samples_state = gr.State()
    created_schema_state = gr.State()
    ddl_schema_state = gr.State()

    with gr.Tab("Create Schema"):
        with gr.Row():
            # Left Panel: Input & Options
            with gr.Column(scale=1):
                gr.Markdown("### 1. Import Samples")
                samples_file = gr.File(label="Upload JSON File", file_types=[".json"])
                samples_text = gr.Code(label="...or paste JSON samples", language="json")
                samples_status = gr.Textbox(label="Status", interactive=False)

                gr.Markdown("### 2. Required Fields")
                required_fields = gr.Textbox(label="Required Fields", placeholder="e.g., id, name, email")
                use_substring = gr.Checkbox(label="Use Substring Matching", value=False)
                case_insensitive = gr.Checkbox(label="Case Insensitive Matching", value=False)
                override_required = gr.Checkbox(label="Override Inferred Required", value=False)

                gr.Markdown("### 3. Type Overrides")
                schema_rules_text = gr.Textbox(
                    label="Quick Rules",
                    placeholder="postcode->number, *created*->string, email->string",
                    lines=2,
                )
                schema_rules_table = gr.Dataframe(
                    headers=RULE_TABLE_HEADERS,
                    datatype=["str", "str", "str"],
                    col_count=(3, "fixed"),
                    interactive=True,
                    label="Advanced Rules (Match Type: exact, partial, prefix, suffix)",
                )

                gr.Markdown("### 4. Inference")
                infer_date_times = gr.Checkbox(label="Infer Date-Times", value=True)
                infer_uuids = gr.Checkbox(label="Infer UUIDs", value=True)

                gr.Markdown("### 5. Naming & Output")
                lowercase_fields = gr.Checkbox(label="Lowercase All Fields", value=False)
                minimise_output = gr.Checkbox(label="Minimise Output Size", value=True)
                include_definitions = gr.Checkbox(label="Include Definitions", value=False)
                alphabetize = gr.Checkbox(label="Alphabetize Properties", value=False)
                create_btn = gr.Button("Create Schema", variant="primary")

            # Right Panel: Result
            with gr.Column(scale=1):
                gr.Markdown("### 6. Schema")
                schema_status = gr.Textbox(label="Status", interactive=False)
                schema_output = gr.JSON(label="Schema")
                indentation = gr.Number(label="Indentation", value=2, precision=0)
                schema_filename = gr.Textbox(label="Output Filename (optional)", placeholder="schema")
                export_schema_btn = gr.Button("Export Schema")
                schema_download = gr.File(label="Download Schema")

        samples_file.upload(
            fn=load_samples_handler,
            inputs=[samples_file],
            outputs=[samples_state, samples_status],
        )

        create_btn.click(
            fn=create_schema_handler,
            inputs=[
                samples_state,
                samples_text,
                required_fields,
                use_substring,
                case_insensitive,
                override_required,
                schema_rules_text,
                schema_rules_table,
                lowercase_fields,
                minimise_output,
                include_definitions,
                alphabetize,
                infer_date_times,
                infer_uuids,
            ],
            outputs=[created_schema_state, schema_status],
        )

        created_schema_state.change(
            fn=lambda schema: schema,
            inputs=[created_schema_state],
            outputs=[schema_output],
        )

        export_schema_btn.click(
            fn=export_schema_handler,
            inputs=[created_schema_state, schema_filename, indentation],
            outputs=[schema_download, schema_status],
        )

    with gr.Tab("Generate SQL DDL"):
        with gr.Row():
            with gr.Column(scale=1):
                gr.Markdown("### 1. Schema")
                schema_file = gr.File(label="Upload JSON Schema", file_types=[".json"])
                use_created_btn = gr.Button("Use Schema from Create Schema Tab")
                schema_text = gr.Code(label="Schema", language="json")
                ddl_schema_status = gr.Textbox(label="Status", interactive=False)

                gr.Markdown("### 2. Table")
                database_type = gr.Dropdown(
                    label="Database Type",
                    choices=list(DIALECT_LABELS),
                    value="PostgreSQL",
                    interactive=True,
                )
                table_name = gr.Textbox(label="Table Name", value="my_table")
                primary_key_fields = gr.Textbox(
                    label="Primary Key Fields (overrides auto-detection)",
                    placeholder="e.g., id, user_id",
                )
                auto_detect_pk = gr.Checkbox(label="Auto-Detect Primary Key", value=True)

                gr.Markdown("### 3. Type Overrides")
                sql_rules_text = gr.Textbox(
                    label="Quick Rules",
                    placeholder="id->uuid, *created*->date-time, description->text",
                    lines=2,
                )
                sql_rules_table = gr.Dataframe(
                    headers=RULE_TABLE_HEADERS,
                    datatype=["str", "str", "str"],
                    col_count=(3, "fixed"),
                    interactive=True,
                    label="Advanced Rules",
                )
                preserve_nullability = gr.Checkbox(label="Preserve Nullability on Override", value=True)

                gr.Markdown("### 4. Naming")
                sql_lowercase = gr.Checkbox(label="Lowercase All Fields", value=False)
                quote_identifiers = gr.Checkbox(label="Quote Identifiers", value=False)
                generate_btn = gr.Button("Generate SQL", variant="primary")

            with gr.Column(scale=1):
                gr.Markdown("### 5. SQL")
                sql_status = gr.Textbox(label="Status", interactive=False)
                sql_output = gr.Code(label="CREATE TABLE", language="sql")
                sql_filename = gr.Textbox(label="Output Filename (optional)", placeholder="create_table")
                export_sql_btn = gr.Button("Export SQL")
                sql_download = gr.File(label="Download SQL")

        schema_file.upload(
            fn=load_schema_handler,
            inputs=[schema_file],
            outputs=[ddl_schema_state, schema_text, ddl_schema_status],
        )

        use_created_btn.click(
            fn=use_created_schema_handler,
            inputs=[created_schema_state],
            outputs=[ddl_schema_state, schema_text, ddl_schema_status],
        )

        generate_btn.click(
            fn=generate_sql_handler,
            inputs=[
                ddl_schema_state,
                schema_text,
                database_type,
                table_name,
                primary_key_fields,
                auto_detect_pk,
                sql_rules_text,
                sql_rules_table,
                preserve_nullability,
                sql_lowercase,
                quote_identifiers,
            ],
            outputs=[sql_output, sql_status],
        )

        export_sql_btn.click(
            fn=export_sql_handler,
            inputs=[sql_output, sql_filename],
            outputs=[sql_download, sql_status],
        )

if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    demo.launch()
