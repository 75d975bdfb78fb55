import os
import shutil
import tempfile

import pytest

from protoc_pojo.generator.java_pojo_generator import generate_java_from_proto
from protoc_pojo.main import run
from protoc_pojo.parser.proto_grammar import ProtoReadError, ProtoSyntaxError


COMPLEX_PROTO = """\
syntax = "proto3";

package com.example.shop;

message Address {
    string street = 1;
    string city = 2;
    string state = 3;
    string zip = 4;
}

message Customer {
    string id = 1;
    string name = 2;
    Address billing_address = 3;
    Address shipping_address = 4;
}

enum OrderStatus {
    UNKNOWN = 0;
    PENDING = 1;
    SHIPPED = 2;
    DELIVERED = 3;
    CANCELED = 4;
}

message LineItem {
    string sku = 1;
    int32 quantity = 2;
    double price = 3;
}

message Order {
    string id = 1;
    Customer customer = 2;
    OrderStatus status = 3;
    LineItem item = 4;
    int64 created_at = 5;
}
"""

NESTED_PROTO = """\
package a.b;

message Order {
    message Address {
        string street = 1;
    }
    Address address = 1;
    oneof contact {
        string email = 2;
        string phone = 3;
    }
}
"""


class TestGenerateFromProto:
    def setup_method(self):
        self.work_dir = tempfile.mkdtemp()

    def teardown_method(self):
        shutil.rmtree(self.work_dir)

    def _write(self, name: str, content: str) -> str:
        path = os.path.join(self.work_dir, name)
        with open(path, "w") as f:
            f.write(content)
        return path

    def test_complex_proto(self):
        files = dict(generate_java_from_proto(self._write("complex.proto", COMPLEX_PROTO)))

        assert sorted(files) == [
            "com/example/shop/Address.java",
            "com/example/shop/Customer.java",
            "com/example/shop/LineItem.java",
            "com/example/shop/Order.java",
            "com/example/shop/OrderStatus.java",
        ]
        for source in files.values():
            assert "package com.example.shop;" in source

        addr = files["com/example/shop/Address.java"]
        assert "public class Address" in addr
        for name in ("street", "city", "state", "zip"):
            assert f"private String {name};" in addr
        assert "public String getStreet()" in addr
        assert "public void setStreet(String value)" in addr

        status = files["com/example/shop/OrderStatus.java"]
        assert "public enum OrderStatus" in status
        for variant in ("UNKNOWN(0)", "PENDING(1)", "SHIPPED(2)", "DELIVERED(3)", "CANCELED(4)"):
            assert variant in status
        assert "private final int number;" in status
        assert status.count("public int getNumber()") == 1

        order = files["com/example/shop/Order.java"]
        assert "private Customer customer;" in order
        assert "private OrderStatus status;" in order
        assert "private LineItem item;" in order
        assert "private long created_at;" in order
        assert "public long getCreated_at()" in order
        assert "public void setCreated_at(long value)" in order

        customer = files["com/example/shop/Customer.java"]
        assert "private Address billing_address;" in customer
        assert "private Address shipping_address;" in customer

        item = files["com/example/shop/LineItem.java"]
        assert "private int quantity;" in item
        assert "private double price;" in item

    def test_nested_declaration_gets_its_own_file(self):
        result = generate_java_from_proto(self._write("nested.proto", NESTED_PROTO))

        assert [path for path, _ in result] == ["a/b/Address.java", "a/b/Order.java"]
        order = result[1][1]
        assert "private Address address;" in order
        assert order.index("private Address address;") < order.index("private String email;")
        assert order.index("private String email;") < order.index("private String phone;")
        assert "Contact" not in order
        assert "contact" not in order

    def test_same_input_generates_identical_output(self):
        path = self._write("complex.proto", COMPLEX_PROTO)
        assert generate_java_from_proto(path) == generate_java_from_proto(path)

    def test_malformed_input_raises(self):
        path = self._write("bad.proto", "message Order {\n    int32 id = 1\n}\n")
        with pytest.raises(ProtoSyntaxError):
            generate_java_from_proto(path)

    def test_missing_input_raises(self):
        with pytest.raises(ProtoReadError):
            generate_java_from_proto(os.path.join(self.work_dir, "missing.proto"))


class TestFullPipeline:
    def setup_method(self):
        self.work_dir = tempfile.mkdtemp()
        self.out_dir = tempfile.mkdtemp()
        os.makedirs(os.path.join(self.work_dir, "protos"))
        with open(os.path.join(self.work_dir, "protos", "complex.proto"), "w") as f:
            f.write(COMPLEX_PROTO)

    def teardown_method(self):
        shutil.rmtree(self.work_dir)
        shutil.rmtree(self.out_dir)

    def test_writes_files_under_package_directories(self):
        generated = run(self.work_dir, self.out_dir)

        shop_dir = os.path.join(self.out_dir, "com", "example", "shop")
        assert sorted(os.listdir(shop_dir)) == [
            "Address.java",
            "Customer.java",
            "LineItem.java",
            "Order.java",
            "OrderStatus.java",
        ]
        assert len(generated) == 5
        assert all(os.path.isfile(p) for p in generated)

    def test_output_defaults_to_working_path(self):
        run(self.work_dir)
        assert os.path.isfile(
            os.path.join(self.work_dir, "com", "example", "shop", "Order.java")
        )

    def test_prints_progress(self, capsys):
        run(self.work_dir, self.out_dir)
        out = capsys.readouterr().out
        assert "Found 1 proto file(s)" in out
        assert "5 type(s)" in out
        assert "Done!" in out

    def test_syntax_error_exits_without_writing(self, capsys):
        with open(os.path.join(self.work_dir, "a_bad.proto"), "w") as f:
            f.write("message Broken {\n    string name = 1\n}\n")

        with pytest.raises(SystemExit) as exc_info:
            run(self.work_dir, self.out_dir)

        assert exc_info.value.code == 1
        assert os.listdir(self.out_dir) == []
        assert "FATAL" in capsys.readouterr().err

    def test_no_proto_files(self):
        empty_dir = tempfile.mkdtemp()
        try:
            with pytest.raises(SystemExit) as exc_info:
                run(empty_dir)
            assert exc_info.value.code == 1
        finally:
            shutil.rmtree(empty_dir)
