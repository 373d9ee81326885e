"""Tests for classifying and assembling diagram data."""

import pytest

from erd_cli.database.models import TableDetail, ColumnResult, ConstraintResult, AnalysisResult, TableResult
from erd_cli.diagram.builder import (
    classify_relation,
    classify_attribute_key,
    build_column_data,
    build_table_name,
    build_constraint_data,
    should_skip_constraint,
    table_name_in_list,
    build_diagram_data,
)
from erd_cli.diagram.models import ErdAttributeKey, ErdRelationType, ErdTableData


class TestClassifyRelation:
    """Cardinality truth table."""

    @pytest.mark.parametrize("is_primary,has_multiple_pk,expected", [
        (True, True, ErdRelationType.MANY_TO_ONE),
        (False, True, ErdRelationType.MANY_TO_ONE),
        (False, False, ErdRelationType.MANY_TO_ONE),
        (True, False, ErdRelationType.ONE_TO_ONE),
    ])
    def test_relation(self, is_primary, has_multiple_pk, expected):
        constraint = ConstraintResult(
            fk_table="tableA",
            pk_table="tableB",
            constraint_name="constraintXY",
            is_primary=is_primary,
            has_multiple_pk=has_multiple_pk,
        )

        assert classify_relation(constraint) == expected


class TestClassifyAttributeKey:
    """Primary wins over foreign."""

    @pytest.mark.parametrize("is_primary,is_foreign,expected", [
        (True, False, ErdAttributeKey.PRIMARY_KEY),
        (False, True, ErdAttributeKey.FOREIGN_KEY),
        (True, True, ErdAttributeKey.PRIMARY_KEY),
        (False, False, ErdAttributeKey.NONE),
    ])
    def test_attribute_key(self, is_primary, is_foreign, expected):
        column = ColumnResult(name="", data_type="", is_primary=is_primary, is_foreign=is_foreign)

        assert classify_attribute_key(column) == expected


class TestBuildColumnData:
    """Descriptions and key markers."""

    column = ColumnResult(
        name="testColumn",
        data_type="int",
        is_primary=True,
        enum_values="a,b",
        comment='{"comment":"detail"}',
    )
    expected_comment = "{#quot;comment#quot;:#quot;detail#quot;}"

    def test_all_fields(self, make_config):
        config = make_config(show_descriptions=["enumValues", "columnComments"])

        result = build_column_data(config, self.column)

        assert result.name == "testColumn"
        assert result.data_type == "int"
        assert result.description == "<a,b> " + self.expected_comment
        assert result.attribute_key == ErdAttributeKey.PRIMARY_KEY

    def test_enum_values_only(self, make_config):
        result = build_column_data(make_config(show_descriptions=["enumValues"]), self.column)

        assert result.description == "<a,b>"

    def test_column_comments_only(self, make_config):
        result = build_column_data(make_config(show_descriptions=["columnComments"]), self.column)

        assert result.description == self.expected_comment

    def test_no_description(self, make_config):
        result = build_column_data(make_config(show_descriptions=[""]), self.column)

        assert result.description == ""
        assert result.attribute_key == ErdAttributeKey.PRIMARY_KEY

    def test_omit_attribute_keys(self, make_config):
        config = make_config(omit_attribute_keys=True, show_descriptions=["enumValues", "columnComments"])

        result = build_column_data(config, self.column)

        assert result.description == "<a,b> " + self.expected_comment
        assert result.attribute_key == ErdAttributeKey.NONE

    def test_minimal_fields(self, make_config):
        result = build_column_data(make_config(omit_attribute_keys=True), self.column)

        assert result.description == ""
        assert result.attribute_key == ErdAttributeKey.NONE

    def test_empty_sources_give_empty_description(self, make_config):
        config = make_config(show_descriptions=["enumValues", "columnComments"])

        result = build_column_data(config, ColumnResult(name="plain", data_type="text"))

        assert result.description == ""

    def test_comment_without_enum(self, make_config):
        config = make_config(show_descriptions=["enumValues", "columnComments"])

        result = build_column_data(config, ColumnResult(name="c", comment="say \"hi\""))

        assert result.description == "say #quot;hi#quot;"

    def test_same_input_gives_same_output(self, make_config):
        config = make_config(show_descriptions=["enumValues", "columnComments"])

        assert build_column_data(config, self.column) == build_column_data(config, self.column)


class TestTableNameInList:
    """Exact display name matching."""

    def test_existing_item_is_found(self):
        assert table_name_in_list([ErdTableData(name="testTable")], "testTable")

    def test_missing_item_is_not_found(self):
        assert not table_name_in_list([ErdTableData(name="notTheTableName")], "testTable")

    def test_match_is_case_sensitive(self):
        assert not table_name_in_list([ErdTableData(name="TestTable")], "testTable")


class TestShouldSkipConstraint:
    """Constraints need both endpoints in the diagram."""

    tables = [ErdTableData(name="Table1"), ErdTableData(name="Table2")]

    def test_show_all_constraints_never_skips(self, make_config):
        constraint = ConstraintResult(fk_table="", pk_table="Table1")

        assert not should_skip_constraint(make_config(show_all_constraints=True), self.tables, constraint)

    def test_skip_if_fk_table_missing(self, make_config):
        constraint = ConstraintResult(fk_table="UnknownTable", pk_table="Table1")

        assert should_skip_constraint(make_config(), self.tables, constraint)

    def test_skip_if_pk_table_missing(self, make_config):
        constraint = ConstraintResult(fk_table="Table1", pk_table="UnknownTable")

        assert should_skip_constraint(make_config(), self.tables, constraint)

    def test_keep_if_both_tables_present(self, make_config):
        constraint = ConstraintResult(fk_table="Table2", pk_table="Table1")

        assert not should_skip_constraint(make_config(), self.tables, constraint)

    def test_schema_prefixed_names(self, make_config):
        config = make_config(show_schema_prefix=True, schema_prefix_separator="_")
        tables = [ErdTableData(name="s_Table1"), ErdTableData(name="s_Table2")]
        constraint = ConstraintResult(fk_table="Table2", pk_table="Table1", fk_schema="s", pk_schema="s")

        assert not should_skip_constraint(config, tables, constraint)

    def test_owner_schema_fills_missing_endpoint_schema(self, make_config):
        config = make_config(show_schema_prefix=True, schema_prefix_separator="_")
        tables = [ErdTableData(name="s_Table1"), ErdTableData(name="s_Table2")]
        constraint = ConstraintResult(fk_table="Table2", pk_table="Table1")

        assert not should_skip_constraint(config, tables, constraint, TableDetail("s", "Table2"))


class TestBuildConstraintData:
    """Labels and endpoint names."""

    def test_label_is_column_name(self, make_config):
        constraint = ConstraintResult(fk_table="orders", pk_table="users", column_name="user_id")

        result = build_constraint_data(make_config(), constraint)

        assert result.constraint_label == "user_id"
        assert result.fk_table_name == "orders"
        assert result.pk_table_name == "users"
        assert result.relation == ErdRelationType.MANY_TO_ONE

    def test_omit_constraint_labels(self, make_config):
        constraint = ConstraintResult(fk_table="orders", pk_table="users", column_name="Column1")

        result = build_constraint_data(make_config(omit_constraint_labels=True), constraint)

        assert result.constraint_label == ""

    def test_endpoint_names_use_schema_prefix(self, make_config):
        config = make_config(show_schema_prefix=True)
        constraint = ConstraintResult(fk_table="orders", pk_table="users", fk_schema="shop", pk_schema="auth")

        result = build_constraint_data(config, constraint)

        assert result.fk_table_name == '"shop.orders"'
        assert result.pk_table_name == '"auth.users"'


class TestBuildTableName:
    """Schema prefix and quoting."""

    table = TableDetail(schema="SchemaName", name="TableName")

    def test_no_prefix(self, make_config):
        assert build_table_name(make_config(), self.table) == "TableName"

    def test_prefix_with_separator(self, make_config):
        config = make_config(show_schema_prefix=True, schema_prefix_separator="_")

        assert build_table_name(config, self.table) == "SchemaName_TableName"

    def test_full_stop_separator_is_quoted(self, make_config):
        config = make_config(show_schema_prefix=True, schema_prefix_separator=".")

        assert build_table_name(config, self.table) == '"SchemaName.TableName"'


class TestBuildDiagramData:
    """Whole-result building."""

    def test_keeps_constraints_between_selected_tables(self, make_config):
        table_a = TableDetail("s", "tableA")
        table_b = TableDetail("s", "tableB")
        constraint = ConstraintResult(
            fk_table="tableA", pk_table="tableB", column_name="b_id", constraint_name="testConstraint",
        )
        result = AnalysisResult(tables=[
            TableResult(table=table_a, columns=[ColumnResult(name="b_id", is_foreign=True)], constraints=[constraint]),
            TableResult(table=table_b, columns=[ColumnResult(name="id", is_primary=True)], constraints=[constraint]),
        ])

        diagram = build_diagram_data(make_config(), result)

        assert [t.name for t in diagram.tables] == ["tableA", "tableB"]
        assert len(diagram.constraints) == 2
        assert all(c.relation == ErdRelationType.MANY_TO_ONE for c in diagram.constraints)
        assert all(c.fk_table_name == "tableA" and c.pk_table_name == "tableB" for c in diagram.constraints)

    def test_skips_constraints_to_unselected_tables(self, make_config, sample_result):
        partial = AnalysisResult(tables=[sample_result.tables[0]])

        assert build_diagram_data(make_config(), partial).constraints == []
        assert len(build_diagram_data(make_config(show_all_constraints=True), partial).constraints) == 1

    def test_drops_duplicate_tables(self, make_config, sample_result):
        doubled = AnalysisResult(tables=sample_result.tables + sample_result.tables)

        diagram = build_diagram_data(make_config(), doubled)

        assert [t.name for t in diagram.tables] == ["customers", "orders"]

    def test_columns_are_converted(self, make_config, sample_result):
        diagram = build_diagram_data(make_config(show_descriptions=["enumValues"]), sample_result)

        orders = diagram.tables[1]
        assert [c.attribute_key for c in orders.columns] == [
            ErdAttributeKey.FOREIGN_KEY,
            ErdAttributeKey.PRIMARY_KEY,
            ErdAttributeKey.NONE,
        ]
        assert orders.columns[2].description == "<new,paid>"
