"""Integration tests for end-to-end workflows."""

from tissbatch.cli.main import cli


def test_full_workflow(cli_runner, temp_db, upload_dir, tiss_xml):
    """Test complete workflow: upload → inspect → reconcile-all → fix file → reconcile-all."""
    args = ["--db-path", temp_db.database_path, "--upload-dir", str(upload_dir)]

    # Step 1: Three uploaded batches, the second with a broken file
    (upload_dir / "lote_0001.xml").write_bytes(tiss_xml(batch_number="0001"))
    (upload_dir / "lote_0002.xml").write_bytes(b"<mensagemTISS><cabecalho>")
    (upload_dir / "lote_0003.xml").write_bytes(
        tiss_xml(batch_number="0003", omit=("CNES",), header={"sequencialTransacao": "1003"})
    )
    ids = [
        temp_db.create_batch(batch_number=f"000{n}", xml_filename=f"lote_000{n}.xml")
        for n in (1, 2, 3)
    ]

    # Step 2: Everything is pending
    result = cli_runner.invoke(cli, args + ["inspect", "--incomplete-only"])
    assert result.exit_code == 0
    assert "Found 3 batch(es)" in result.output

    # Step 3: First run reconciles the good files and reports the broken one
    result = cli_runner.invoke(cli, args + ["reconcile-all"])
    assert result.exit_code == 1
    assert "cause=malformed_document" in result.output
    assert "Succeeded: 2" in result.output
    assert [item.id for item in temp_db.list_incomplete_batches()] == [ids[1]]
    assert temp_db.get_batch(ids[2]).header.transaction_sequence == "1003"
    assert temp_db.get_batch(ids[2]).header.facility_cnes is None

    # Step 4: Rerunning only touches the remaining batch
    result = cli_runner.invoke(cli, args + ["reconcile-all"])
    assert result.exit_code == 1
    assert "Attempted: 1" in result.output

    # Step 5: After the file is replaced the backlog drains
    (upload_dir / "lote_0002.xml").write_bytes(tiss_xml(batch_number="0002"))
    result = cli_runner.invoke(cli, args + ["reconcile-all"])
    assert result.exit_code == 0
    assert "Succeeded: 1" in result.output

    result = cli_runner.invoke(cli, args + ["reconcile-all"])
    assert result.exit_code == 0
    assert "No batches to reconcile." in result.output

    # Step 6: Inspection shows every header complete
    result = cli_runner.invoke(cli, args + ["inspect"])
    assert result.exit_code == 0
    assert "Complete header: 3" in result.output
    assert "Incomplete header: 0" in result.output
